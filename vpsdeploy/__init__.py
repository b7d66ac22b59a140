"""vpsdeploy - deploy a Dockerized git project to a single Linux host over SSH."""

__version__ = "1.0.0"
