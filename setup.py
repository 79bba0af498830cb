import setuptools

with open("README.md", "r") as f:
    readme = f.read()

setuptools.setup(
    # Package
    name="jsonrevive",
    version="1.0a1",
    packages=setuptools.find_packages("src"),
    package_dir={"": "src"},
    python_requires="~=3.9",
    install_requires=["attrs>=20.1"],
    extras_require={"test": ["pytest", "hypothesis"]},
    # Metadata
    license="MIT",
    description="Revive JSON documents as instances of python classes",
    long_description=readme,
    long_description_content_type="text/markdown",
    keywords="json",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3.9",
        "Typing :: Typed"
    ],
)
