#!/usr/bin/env python

from setuptools import setup


version = open('TileShelf/VERSION', 'r').read().strip()


requires = ['Werkzeug']


setup(name='TileShelf',
      version=version,
      description='A little shelf for your vector tiles.',
      install_requires=requires,
      extras_require={'stylesheets': ['PyYAML'],
                      'test': ['pytest', 'PyYAML']},
      packages=['TileShelf'],
      scripts=['scripts/tileshelf-server.py'],
      package_data={'TileShelf': ['VERSION']},
      license='BSD')
