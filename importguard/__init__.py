"""importguard: per-file import policy enforcement.

Layout:

- importguard/policy: data model, glob matching, evaluator (pure)
- importguard/config: policy loading from pyproject.toml / .importguard.toml / JSON
- importguard/host: language service protocol, decorator adapter, Python host
- importguard/checks: project-wide check over a source tree
- importguard/cli: command handlers for importguard_cli
"""

__version__ = "0.3.0"
