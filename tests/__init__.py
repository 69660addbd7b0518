"""
Beranouns Tests

Test Sections:
    test_beranouns        Deployment and end-to-end scenario
    test_pause            Pause gate
    test_ownership        Owner-only administration
    test_mint             Minting rules, payment and expiry
    test_registrations    Renew, transfer, retarget, resolve
    test_pricing          Pricing strategies and quotes
    test_components       Label components (incl. property tests)
    test_ledger           Ordering, time and concurrency
    test_replay           Attestations, snapshot and replay
    test_config           Deployment files
    test_cli              Command-line interface
    test_logging          Structured logging
    test_errors           Error hierarchy, invariant catalogue, addresses

Acceptance Rule:
    A rejected call never changes registry state.
"""
