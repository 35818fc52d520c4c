"""
SkillScope REST API.
"""
