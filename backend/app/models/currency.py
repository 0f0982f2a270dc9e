"""
Supported currency codes.
"""

import enum


class Currency(str, enum.Enum):
    """ISO 4217 codes accepted on accounts, cards and transactions."""
    # North America
    USD = "USD"
    MXN = "MXN"
    CAD = "CAD"
    # Caribbean
    DOP = "DOP"
    HTG = "HTG"
    JMD = "JMD"
    TTD = "TTD"
    BBD = "BBD"
    BSD = "BSD"
    CUP = "CUP"
    # Central America
    GTQ = "GTQ"
    HNL = "HNL"
    NIO = "NIO"
    CRC = "CRC"
    PAB = "PAB"
    # South America
    COP = "COP"
    VES = "VES"
    PEN = "PEN"
    CLP = "CLP"
    ARS = "ARS"
    BRL = "BRL"
    UYU = "UYU"
    PYG = "PYG"
    BOB = "BOB"
    # Europe
    EUR = "EUR"
    GBP = "GBP"
    CHF = "CHF"
