# src/edgarlink/infrastructure/external_apis/edgar/__init__.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""EDGAR external API package.

Purpose:
    Group EDGAR-related infrastructure modules:

    * settings: Pydantic settings for the EDGAR client.
    * request: Immutable outbound request descriptor.
    * client: Rate-governed async HTTP transport for SEC EDGAR.
    * types: Typed response fragments for EDGAR endpoints.
"""

from __future__ import annotations
