"""
Prompt text and stage labels for the query building and summarization workflows.
"""

KG_NAME = 'Knowledge Graph'

# Stage labels attached to chat turns for history and logging
STAGE_QUERY_BUILDING = 'Query Building'
STAGE_ENTITY_SEARCH = 'Entity Fuzzy Searching'
STAGE_PROPERTY_SEARCH = 'Property Search'
STAGE_TAIL_SEARCH = 'Tail Search'
STAGE_SUMMARIZATION = 'Query Summarization'

INITIAL_QUERY_BUILDING_SYSTEM_MESSAGE = """You are an AI assistant that helps construct openCypher queries for a knowledge graph.

The knowledge graph contains documents that have been processed into chunks and entities.
Schema:
- (Document) nodes represent uploaded documents
- (Chunk) nodes represent pieces of those documents
- (__Entity__) nodes represent entities extracted from the documents
- Relationships:
  - (Chunk)-[:PART_OF]->(Document)
  - (__Entity__)-[:MENTIONED_IN]->(Chunk)
  - (__Entity__)-[:RELATED_TO]->(__Entity__)

To build queries, you can:
1. Search for entities: "Entity Search: <search term>"
2. Search for properties of an entity: "Properties Search: <entity_id>"
3. Find entities related to another entity: "Tail Search: <entity_id>, <relationship_type>"

Issue exactly one search per response.
When you're ready to stop searching and construct the query, respond with "STOP".
"""

INVALID_RESPONSE_MESSAGE = ('That was an invalid response. If you are done, just respond with STOP. '
                            'Follow the specified format. ' + INITIAL_QUERY_BUILDING_SYSTEM_MESSAGE)

FINAL_QUERY_SYSTEM_MESSAGE = ("Now construct an openCypher query that answers the user's question using only the entity "
                              "and relationship IDs you've found. The query should be syntactically correct openCypher. "
                              'Return the query in a single ```cypher code block. '
                              "Now construct a query that answers the user's question: {question}")

TAIL_SEARCH_FORMAT_MESSAGE = 'Your response did not follow the correct format. Please provide: Entity ID, Relationship Type'

SUMMARIZATION_SYSTEM_MESSAGE = """You are an expert in openCypher queries and graph databases. When summarizing query results:
1. Analyze the query structure to understand what data is being requested
2. Examine the results carefully and identify key patterns and insights
3. Provide a clear, concise explanation of what the results show
4. Highlight any interesting relationships or patterns in the data
5. If the results are empty, suggest potential reasons why
6. Use simple language that a non-technical user can understand
"""

SUMMARIZATION_USER_MESSAGE = """I executed the following openCypher query:

```cypher
{query}
```

And got these results:

{results}

Please provide a clear, concise summary of what these results show. Explain any patterns or insights that might be relevant."""

ERROR_EXPLANATION_MESSAGE = """The following openCypher query caused an error. Can you explain what went wrong and how to fix it?

```cypher
{query}
```

Error: {error}"""
