from trello_mcp.main import run

run()
