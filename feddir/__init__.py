"""Parse and search FedACH and Fedwire participant directories."""

__version__ = "0.1.0"