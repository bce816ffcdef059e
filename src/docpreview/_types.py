"""Shared type definitions for docpreview."""

from typing import Literal

# SSE client identifier
type ClientID = str

# Name of a live message pushed to browsers
type MessageKind = Literal["readme", "manifest", "docs", "diff", "error"]
