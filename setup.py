from setuptools import setup

setup(
    name='ndhistogram',
    version='0.5.0',
    description='Histogram and quantile support for n-dimensional numpy arrays',
    install_requires=['numpy>=1.25', 'pandas'],
    extras_require={'test': ['pytest']},
    packages=['ndhistogram'],
    python_requires='>=3.10',
    zip_safe=False
)
