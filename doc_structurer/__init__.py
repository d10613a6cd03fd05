"""Document structuring service.

Extracts raw text from PDFs and scanned images, pulls key-value form
fields out of that text, and uses a chat-completion model to reshape
extracted data into caller-defined JSON schemas.
"""
