from setuptools import setup, find_packages

setup(
    name='idnakit',
    version='0.1.0',
    description='UTS #46 / IDNA2008 domain name processing',
    packages=find_packages(exclude=['tests', 'tests.*']),
    package_data={
        'idnakit.core.data': ['*.txt'],
    },
    include_package_data=True,
    python_requires='>=3.9',
    install_requires=[
        'click>=8.1.0',
        'rich>=13.0.0',
        'pyyaml>=6.0',
    ],
    extras_require={
        'test': ['pytest>=7.0'],
    },
    entry_points={
        'console_scripts': [
            'idnakit=idnakit.cli:main',
        ],
    },
)
