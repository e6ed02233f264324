"""Prompts for cold outreach: email and redesign proposal."""

OUTREACH_EMAIL_PROMPT = """Create a professional cold email for web design services:

Target Business: {name}
Industry: {industry}
Current Issues: {issues}
Your Name: {sender_name}
Your Email: {sender_email}
Package Price: {price}

Create a compelling cold email that:
- Has an attention-grabbing subject line
- Addresses their specific pain points
- Offers a solution (new website)
- Shows value and professionalism
- Includes a clear call to action
- Keep it concise (under 200 words)

Format as:
Subject: [subject line]

[email body]"""

OUTREACH_PROPOSAL_PROMPT = """Create a detailed website redesign proposal:

Client: {name}
Industry: {industry}
Services: {services}
Current Issues: {issues}
Price: {price}
Your Company: {sender_name}
Contact: {sender_email}

Create a professional proposal including:
- Executive summary
- Current website analysis
- Proposed solution
- Key features and benefits
- Timeline (suggest 2-3 weeks)
- Investment breakdown
- Next steps

Make it compelling and professional."""
