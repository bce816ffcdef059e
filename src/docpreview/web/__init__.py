"""HTTP routes for the local preview server and hosted mode."""

from docpreview.web.hosted import HostedRouter
from docpreview.web.local import LocalRouter

__all__ = ["HostedRouter", "LocalRouter"]
