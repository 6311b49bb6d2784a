from setuptools import setup, find_packages

setup(
    name='levelcode',
    version='0.1.0',
    author='Virgil',
    author_email='virgil@example.com',
    description='Portable, validated and shareable level documents for a block-breaker level editor',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    url='https://github.com/example/levelcode',
    packages=find_packages(include=['levelcode', 'levelcode.*']),
    install_requires=[
        'numpy>=1.20.0',
        'nh3>=0.2.14',
    ],
    extras_require={
        'dev': [
            'pytest>=7.0.0',
            'pytest-cov>=4.0.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'levelcode=levelcode.cli:main',
        ],
    },
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'License :: Other/Proprietary License',
        'Operating System :: OS Independent',
        'Topic :: Games/Entertainment',
    ],
    python_requires='>=3.8',
    include_package_data=True,
    package_data={
        'levelcode': ['py.typed'],
    },
)
