import re
import setuptools

with open('urikit/__init__.py', 'r') as fd:
    version = re.search(r'^__version__\s*=\s*[\'"]([^\'"]*)[\'"]', fd.read(), re.MULTILINE).group(1)

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="urikit",
    version=version,
    description="URI parsing, relative resolution and rendering",
    long_description=long_description,
    long_description_content_type="text/markdown",
    platforms=["any"],
    python_requires=">=3.11",
    install_requires=["pydantic>=2", "toml", "deepmerge", "tabulate"],
    extras_require={"test": ["pytest", "pytest-mock"]},
    package_dir={'': '.'},
    packages=setuptools.find_packages(include=["urikit", "urikit.*"]),
    package_data={"": ["README.md"]},
)
