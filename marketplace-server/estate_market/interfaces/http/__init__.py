"""HTTP interface: dependencies, routers and error translation."""
