"""
Setup configuration for transcript-reconciliation.
"""

from setuptools import setup, find_packages

setup(
    name='transcript-reconciliation',
    version='1.0.0',
    description='Sentence boundary detection and duplicate reconciliation for live speech transcripts',
    author='Low Latency Translate Team',
    packages=find_packages(exclude=['tests', 'tests.*']),
    python_requires='>=3.11',
    install_requires=[
        'python-Levenshtein>=0.21.0',
    ],
    extras_require={
        'dev': [
            'pytest>=7.4.0',
            'pytest-asyncio>=0.21.0',
            'pytest-cov>=4.1.0',
            'pylint>=2.17.0',
            'flake8>=6.0.0',
            'black>=23.0.0',
            'mypy>=1.4.0',
        ]
    }
)
