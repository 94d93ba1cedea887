from setuptools import setup, find_packages
import re
from pathlib import Path

_version_re = re.compile(r"^__version__\s*(?::\s*[\w\[\]]+)?\s*=\s*['\"]([^'\"]+)['\"]", re.M)


def file_getVersion(rel_path: str) -> str:
    """
    Retrieve the version string from the specified file.
    """
    version_file = Path(rel_path)
    if not version_file.exists():
        raise RuntimeError(f"Version file {rel_path} not found.")

    with open(version_file, 'r') as f:
        content = f.read()
        match = _version_re.search(content)
        if not match:
            raise RuntimeError(f"Could not find __version__ in {rel_path}")
        return match.group(1)


setup(
    name='replkit',
    version=file_getVersion('replkit/replkit.py'),
    description='An interactive shell layered over Click command groups',
    author='FNNDSC',
    author_email='rudolph.pienaar@childrens.harvard.edu',
    url='https://github.com/FNNDSC/replkit',
    packages=find_packages(include=['replkit', 'replkit.*']),
    python_requires='>=3.11',
    install_requires=[
        'click>=8.1',
        'rich',
        'loguru',
        'prompt_toolkit>=3.0',
        'pydantic>=2.0',
        'pydantic-settings>=2.2',
        'appdirs',
    ],
    license='MIT',
    entry_points={
        'console_scripts': [
            'replkit = replkit.replkit:main'
        ]
    },
    classifiers=[
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Environment :: Console',
        'Topic :: Software Development :: User Interfaces',
    ],
    extras_require={
        'none': [],
        'dev': [
            'pytest>=7.1'
        ],
        'test': [
            'pytest>=7.1'
        ]
    }
)
