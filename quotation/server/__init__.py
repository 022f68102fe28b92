"""Quotation server: fetches, stores and relays the USD-BRL bid."""
