"""
Core pull request apply pipeline: API access, data records, errors,
installers and orchestration.
"""
