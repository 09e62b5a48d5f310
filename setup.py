from setuptools import setup, find_packages

setup(
    name='bcvec',
    version='0.1.0',
    description='Tools for spatial vector analysis of weather stations, catchments and BEC zones',
    author='Matthew Whittle',
    author_email='matthewjwhittle@gmail.com',
    packages=find_packages(include=['bcvec', 'bcvec.*']),
    include_package_data=True,
    install_requires=[
        'geopandas>=0.14',
        'pandas',
        'numpy',
        'shapely>=2.0',
        'pyproj',
        'pyogrio',
        'pyarrow',
        'requests',
        'pyyaml',
        'pyhere',
        'typer',
        'typing_extensions',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'bcvec=bcvec.cli:app',
        ],
    },
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
    ],
)
