"""IRRF calculator service.

Monthly Brazilian withholding income tax (table from 05/2025) with the
PL 1087/25 transitional reduction, exposed as a FastAPI app and a CLI.
"""
