"""AMM (Automated Market Maker) integrations."""
