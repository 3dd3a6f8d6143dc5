"""DevSecOps Demo API."""
