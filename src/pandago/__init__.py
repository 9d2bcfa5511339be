# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/pandago_sdk

"""
Client SDK for the pandago last-mile delivery API: JWT-assertion authentication,
token caching and typed, diagnosable request errors.
"""

__version__ = "0.1.0"
__author__ = "Gowtham A Rao"
__email__ = "gowtham.rao@coreason.ai"

from .assertion import AssertionSigner
from .client import PandagoClient, PandagoClientAsync
from .config import PandagoConfig
from .error_handler import ErrorHandler
from .exceptions import (
    AuthenticationError,
    ConfigurationError,
    PandagoError,
    RequestError,
    TransportError,
    UnexpectedFormatError,
)
from .models import Token
from .token_manager import TokenManager
from .transport import HttpxTransport, Transport

__all__ = [
    "AssertionSigner",
    "AuthenticationError",
    "ConfigurationError",
    "ErrorHandler",
    "HttpxTransport",
    "PandagoClient",
    "PandagoClientAsync",
    "PandagoConfig",
    "PandagoError",
    "RequestError",
    "Token",
    "TokenManager",
    "Transport",
    "TransportError",
    "UnexpectedFormatError",
]
