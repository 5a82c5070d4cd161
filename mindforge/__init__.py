"""MindForge learning-management API."""
