"""Tool schemas for the Kagi MCP tools.

Defines the description and JSON Schema for each tool's input parameters.
"""

TOOL_SCHEMAS = {
    "kagi_search_fetch": {
        "description": "Fetch web results based on one or more queries using the Kagi Search API. Use for general search and when the user explicitly tells you to 'fetch' results/information. Results are from all queries given. They are numbered continuously, so that a user may be able to refer to a result by a specific number.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "queries": {
                    "type": "array",
                    "items": {
                        "type": "string"
                    },
                    "description": "One or more concise, keyword-focused search queries. Include essential context within each query for standalone use."
                }
            },
            "required": ["queries"]
        }
    },

    "kagi_summarizer": {
        "description": "Summarize content from a URL using the Kagi Summarizer API. The Summarizer can summarize any document type (text webpage, video, audio, etc.)",
        "inputSchema": {
            "type": "object",
            "properties": {
                "url": {
                    "type": "string",
                    "description": "A URL to a document to summarize."
                },
                "summary_type": {
                    "type": "string",
                    "enum": ["summary", "takeaway"],
                    "default": "summary",
                    "description": "Type of summary to produce. Options are 'summary' for paragraph prose and 'takeaway' for a bulleted list of key points."
                },
                "engine": {
                    "type": "string",
                    "enum": ["cecil", "agnes", "daphne", "muriel"],
                    "description": "Summarization engine to use. Defaults to configured engine."
                },
                "target_language": {
                    "type": "string",
                    "description": "Desired output language using language codes (e.g., 'EN' for English). If not specified, the document's original language influences the output."
                }
            },
            "required": ["url"]
        }
    },

    "kagi_fastgpt": {
        "description": "Answer a question using Kagi FastGPT, which runs a web search and writes a short answer with numbered references. Use for direct factual questions where a synthesized answer is more useful than a list of links.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "The question to answer."
                }
            },
            "required": ["query"]
        }
    },

    "kagi_enrich": {
        "description": "Search Kagi's enrichment indexes for non-commercial 'small web' content (source 'web') or non-mainstream news and discussions (source 'news'). Complements kagi_search_fetch with results ordinary search tends to miss.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "Search query."
                },
                "source": {
                    "type": "string",
                    "enum": ["web", "news"],
                    "default": "web",
                    "description": "Which enrichment index to query."
                }
            },
            "required": ["query"]
        }
    },
}
