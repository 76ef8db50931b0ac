"""
Static problem-statement catalogue.
"""

from __future__ import annotations

PROBLEM_STATEMENTS: tuple[str, ...] = (
    "AI-Powered Learning Management System",
    "Smart Campus Navigation App",
    "Sustainable Energy Monitoring Platform",
    "Mental Health Support Chatbot",
    "Blockchain-based Certificate Verification",
    "IoT-based Smart Agriculture Solution",
    "AR/VR Educational Content Platform",
    "Cybersecurity Threat Detection System",
    "Social Impact Measurement Tool",
    "Digital Healthcare Management System",
)
