"""Language server integration."""
