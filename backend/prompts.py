from datetime import datetime, timezone

# System instruction sent with every provider call
SYSTEM_PROMPT = "You are a task parsing expert. Extract structured task information from natural language input and respond with valid JSON only."

# Single-task parsing: one sentence -> one JSON object
# Relative dates are resolved by the model against {reference}
SINGLE_TASK_PROMPT = """Parse the following natural language task input and extract structured information. Return a JSON object with the following fields:
- name: The main task description/action
- assignee: The person assigned to the task (if not specified, use "Unassigned")
- dueDate: The due date and time in ISO 8601 format (if relative like "tomorrow" or "next week", calculate the actual date)
- priority: One of P1 (critical), P2 (high), P3 (medium), P4 (low). Default to P3 if not specified.
- description: Additional context or details (optional)

Current date and time: {reference}

Task input: "{text}"

Return only a valid JSON object."""

# Transcript parsing: meeting transcript -> JSON array of tasks
TRANSCRIPT_PROMPT = """You are a task extraction system. Extract tasks from the following meeting transcript.

Rules:
1. Return ONLY a JSON array, nothing else
2. Each task must have exactly these fields: name, assignee, dueDate, priority
3. Priority must be one of: P1, P2, P3, P4 (default to P3)
4. Do not include any explanations or additional text

Example Input:
"Aman you take the landing page by 10pm tomorrow. Rajeev you take care of client follow-up by Wednesday."

Example Output:
[{{"name":"Take the landing page","assignee":"Aman","dueDate":"10:00 PM, Tomorrow","priority":"P3"}},{{"name":"Client follow-up","assignee":"Rajeev","dueDate":"Wednesday","priority":"P3"}}]

Now parse this transcript (remember, respond with ONLY the JSON array):
{transcript}"""


def format_instant(moment: datetime) -> str:
    """Format an aware datetime as a UTC ISO 8601 instant with millisecond precision."""
    utc = moment.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def build_single_task_prompt(text: str, reference: datetime) -> str:
    return SINGLE_TASK_PROMPT.format(reference=format_instant(reference), text=text)


def build_transcript_prompt(transcript: str) -> str:
    return TRANSCRIPT_PROMPT.format(transcript=transcript)
