"""
Realty Modules.

Thin orchestration layers over the realty kernel and engines.  Each module
owns its report DTOs, configuration schema and a service that loads a
snapshot and calls pure builders.

Modules:
- Reporting: balance sheet, category and P&L reports, ledgers, budget
  vs actual, PM-cost accrual, contract and project summaries.
"""
