from __future__ import annotations

from pathlib import Path

from setuptools import find_packages, setup


HERE = Path(__file__).resolve().parent


def _requirements(name: str) -> list[str]:
    """Pinned requirements from a requirements file, minus comments and -r includes."""
    path = HERE / name
    if not path.is_file():
        return []
    lines = (line.strip() for line in path.read_text(encoding="utf-8").splitlines())
    return [line for line in lines if line and not line.startswith(("#", "-"))]


version_file = HERE / "kioskday" / "VERSION"
readme = HERE / "README.md"

setup(
    name="kioskday",
    version=version_file.read_text(encoding="utf-8").strip() if version_file.is_file() else "0.1.0",
    description="Kiosk dashboard data core – weekday image extraction + today's calendar events",
    long_description=readme.read_text(encoding="utf-8") if readme.is_file() else "",
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=("tests",)),
    package_data={"kioskday": ["VERSION"]},
    python_requires=">=3.9",
    install_requires=_requirements("requirements.txt"),
    extras_require={"dev": _requirements("requirements-dev.txt")},
    entry_points={"console_scripts": ["kioskday=kioskday.cli:main"]},
)
