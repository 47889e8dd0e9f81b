"""mvn-gitflow: drive a git-flow + Maven release through ordered phases."""

__version__ = "0.3.0"
