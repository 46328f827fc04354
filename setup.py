#!/usr/bin/env python
#
# Copyright (c) 2026 Wind River Systems, Inc.
#
# SPDX-License-Identifier: Apache-2.0
#
import setuptools

setuptools.setup(
    name='dumptruck',
    version='1.0.0',
    description='Coredump handler storing cores on HDFS',
    license='Apache-2.0',
    python_requires='>=3.8',
    install_requires=['requests', 'oslo.config', 'docker', 'hdfs'],
    extras_require={
        'test': ['testtools', 'fixtures', 'mock', 'pytest'],
    },
    packages=['dumptruck', 'dumptruck.common', 'dumptruck.tests'],
    include_package_data=True,
    entry_points={
        'console_scripts': [
            'dumptruck = dumptruck.__main__:main',
        ],
    }
)
