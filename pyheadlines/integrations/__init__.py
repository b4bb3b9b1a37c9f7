"""Optional framework integrations. Install the matching extra to use them."""
