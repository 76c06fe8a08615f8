"""Infrastructure layer: config files, logging, SQL Server, LDAP and Azure access."""
