#!/usr/bin/env python
import os
import sys

vi = sys.version_info
if vi < (3, 6):
    raise Exception("svnhelper requires Python 3.6 or later.")

from setuptools import setup

def find_packages(dir_):
    packages = []
    for pkg in ['svnhelper']:
        for _dir, subdirectories, files in (
                os.walk(os.path.join(dir_, pkg))
            ):
            if '__init__.py' in files:
                fragment = os.path.relpath(_dir, dir_)
                packages.append(fragment.replace(os.sep, '.'))
    return packages

def run_setup():
    setup(
        name='svnhelper',
        version='0.1',
        description='Subversion helper for sparse working copies, safe '
                    'merges and single-commit file copy transactions',
        packages=find_packages('lib'),
        package_dir={'': 'lib'},
        scripts=['scripts/svnhelper'],
        python_requires='>=3.6',
        install_requires=[],
    )

if __name__ == '__main__':
    run_setup()

# vim:set ts=8 sw=4 sts=4 tw=78 et:
