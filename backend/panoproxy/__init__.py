"""PanoProxy: REST proxy in front of the Panopto recorder and session APIs."""

__version__ = "0.1.0"
