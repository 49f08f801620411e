#!/usr/bin/env python3
"""Setup script for netdiag"""

from setuptools import setup, find_packages
from pathlib import Path

# Read README
readme_file = Path(__file__).parent / 'README.md'
long_description = readme_file.read_text() if readme_file.exists() else ''

# Read requirements
requirements_file = Path(__file__).parent / 'requirements.txt'
requirements = []
if requirements_file.exists():
    requirements = [
        line.strip()
        for line in requirements_file.read_text().splitlines()
        if line.strip() and not line.startswith('#')
    ]

setup(
    name='netdiag',
    version='1.0.0',
    description='Network diagnostics client that streams a shareable report',
    long_description=long_description,
    long_description_content_type='text/markdown',
    url='https://github.com/railwayapp/netdiag',
    license='MIT',
    packages=find_packages(where='src'),
    package_dir={'': 'src'},
    py_modules=['main', '__version__'],
    install_requires=requirements,
    extras_require={
        'test': [
            'pytest>=7.0',
            'pytest-asyncio>=0.21',
        ],
    },
    python_requires='>=3.8',
    entry_points={
        'console_scripts': [
            'netdiag=main:main',
        ],
    },
    classifiers=[
        'Development Status :: 4 - Beta',
        'Environment :: Console',
        'Intended Audience :: End Users/Desktop',
        'Intended Audience :: System Administrators',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Topic :: System :: Networking :: Monitoring',
    ],
    keywords='network diagnostics traceroute ping dns tui',
    project_urls={
        'Source': 'https://github.com/railwayapp/netdiag',
    },
    include_package_data=True,
    zip_safe=False,
)
