import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="gemline",
    version="0.1.0",
    author="Maarten Jacobs",
    author_email="maarten.j.jacobs@gmail.com",
    description="Gemini client library with a streaming text/gemini parser",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/maartenJacobs/gemline",
    packages=setuptools.find_packages(include=["gemline", "gemline.*"]),
    extras_require={"test": ["pytest", "hypothesis"]},
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Topic :: Utilities",
        "Topic :: Internet",
    ],
    python_requires="~=3.8",  # Python >= 3.8 but < 4
    keywords=["gemini", "gemtext", "gemline"],
)
