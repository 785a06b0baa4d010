# Dedicated to the public domain under CC0: https://creativecommons.org/publicdomain/zero/1.0/.

from setuptools import setup


name = 'covmonkey'

setup(
  name=name,
  version='0.15',
  description='Line coverage and dead code analysis of script engine opcode traces.',
  long_description=open('readme.wu').read(),
  license='CC0',
  packages=[name],
  python_requires='>=3.10',
  extras_require={'test': ['pytest']},
  entry_points = {'console_scripts': [
    'covmonkey=covmonkey.main:main',
  ]},
)
