# SPDX-License-Identifier: AGPL-3.0-or-later
"""Vendor data engine: records, scoring, contract checks, CSV exchange."""

__version__ = "0.3.0"
