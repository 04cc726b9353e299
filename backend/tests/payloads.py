DEPLOY_RUNBOOK = {
    "title": "Deploy",
    "description": "Production deploy checklist",
    "steps": [
        {"text": "Check CI", "link": "https://ci.example.com/main"},
        {"text": "Notify"},
    ],
}
