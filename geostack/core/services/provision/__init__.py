"""
Geospatial environment provisioning.

Layered like an onion (data → domain → detection → resolver →
execution → orchestration); each layer only imports from the ones
before it. Import from the submodules directly::

    from geostack.core.services.provision.orchestration.orchestrator import run_provision
"""
