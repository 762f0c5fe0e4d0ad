from setuptools import setup

setup(
    name="mpfloat",
    version="0.1.0",  # Match mpfloat.version
    description="Copy-on-write arbitrary-precision floating point values over MPFR",
    install_requires=["gmpy2>=2.1"],
    extras_require={
        "test": ["pytest"],
        "examples": ["numpy"],
    },
    package_data={"mpfloat": ["py.typed"]},
    packages=["mpfloat"],
    zip_safe=False,
    python_requires=">=3.8",
)
