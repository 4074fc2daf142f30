"""HTTP adapters implementing the collaborator protocols.

Internal to pysmartnav; wired by :class:`pysmartnav.client.NavigationClient`.
"""
