"""Optional Creditman apps."""
