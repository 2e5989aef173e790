"""
General-purpose helpers not related to the tunnel connectors themselves.

Helpers do not depend on anything else in the package, and could be extracted
as reusable libraries. If they implement concepts of the domain, they are not
"helpers" (consider making them structs, clients, or the core parts).
"""
