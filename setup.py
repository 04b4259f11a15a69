#!/usr/bin/env python
"""Setuptools distribution file."""
import os
from setuptools import setup


def _get_here(fname):
    return os.path.join(os.path.dirname(__file__), fname)


def _get_long_description(fname, encoding='utf8'):
    return open(fname, 'r', encoding=encoding).read()


setup(name='asyncrfc2217',
      use_scm_version={
          "version_scheme": "guess-next-dev",
          "local_scheme": "dirty-tag",
          "fallback_version": "0.1.0",
      },
      setup_requires=[
          "setuptools_scm",
      ],
      license='ISC',
      description="Python 3 anyio RFC 2217 (Telnet COM port control) client library",
      long_description=_get_long_description(fname=_get_here('README.rst')),
      long_description_content_type='text/x-rst',
      packages=['asyncrfc2217', 'asyncrfc2217.commands', 'asyncrfc2217.options'],
      package_data={'': ['README.rst', 'requirements.txt'], },
      platforms='any',
      zip_safe=True,
      python_requires='>=3.8',
      install_requires=[
         'outcome>=1.1',
         'anyio>=4',
      ],
      extras_require={
         'test': [
             'pytest',
             'trio>=0.32',
         ],
      },
      keywords=', '.join(('rfc2217', 'telnet', 'serial', 'com port', 'client',
                          'library', 'anyio', 'trio', 'asyncio')),
      classifiers=['License :: OSI Approved :: ISC License (ISCL)',
                   'Programming Language :: Python :: 3',
                   'Intended Audience :: Developers',
                   'Development Status :: 3 - Alpha',
                   'Topic :: System :: Networking',
                   'Topic :: Terminals :: Serial',
                   'Topic :: Terminals :: Telnet',
                   ],
      )
