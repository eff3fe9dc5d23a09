"""
Forge Output Module
====================

Console display and report generation for Forge results.
"""

from keyforge.output.console import ForgeConsoleOutput, describe_policy
from keyforge.output.report import ForgeReportGenerator

__all__ = [
    "ForgeConsoleOutput",
    "ForgeReportGenerator",
    "describe_policy",
]
