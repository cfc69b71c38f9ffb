"""Live With Designs shop, portfolio and CMS backend."""
