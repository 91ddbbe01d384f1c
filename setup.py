from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as f:
    readme = f.read()

setup(
    name="turnlanes",
    license="GPL v3",
    version="1.0.0",
    description="Turn lane maneuvers from OpenStreetMap data",
    long_description=readme,
    long_description_content_type="text/markdown",
    author="Mikolaj Kuranowski",
    keywords="osm turn lanes maneuvers",
    classifiers=[
        "Development Status :: 4 - Beta",
        "License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3 :: Only",
        "Topic :: Scientific/Engineering :: GIS",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
    packages=find_packages(include=["turnlanes", "turnlanes.*"]),
    package_data={"turnlanes.osm": ["test_fixtures/*"]},
    python_requires=">=3.8, <4",
    install_requires=["osmiter>=1.1", "typing_extensions"],
    extras_require={"docs": ["sphinx", "furo"]},
    entry_points={"console_scripts": ["turnlanes=turnlanes.__main__:run"]},
    data_files=["README.md"],
)
