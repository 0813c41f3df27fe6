"""Multi-store back office: sales reconciliation and payroll."""
