from setuptools import setup

setup(
    name='simcore',
    version='1.0.0',
    description='A small financial simulation core library',
    author='Inco',
    py_modules=['simcore'],
    classifiers=[
        'Programming Language :: Python :: 3',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
    ],
    install_requires=['typeguard>=4', 'python-dateutil'],
    extras_require={'test': ['pytest']},
    python_requires='>=3.10'
)
