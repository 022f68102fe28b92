"""Quotation client: appends the server's USD-BRL bid to a local file."""
