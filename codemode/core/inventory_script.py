"""Inventory Script — generated TypeScript that walks the proxy and reports every service.

Invariants:
    - render_inventory_script is PURE: proxy base URL in, program text out
    - The program prints exactly one JSON document on stdout:
      {summary: {totalServers, successfulServers, totalTools}, servers: [...]}
    - Zero configured services yields totalServers: 0 and exit code 0
    - A per-server failure becomes a {status: "error"} entry, never aborts the walk

Design Decisions:
    - Generated code runs inside the sandbox like any agent program, so the
      listing exercises the same network path the agent's own code uses
"""

_WILDCARD_HOSTS = frozenset({"0.0.0.0", "::", ""})

_TEMPLATE = """
// Fetch all available MCP servers and their tools
const proxyBase = "__PROXY_BASE__";

try {
  const serversResponse = await fetch(`${proxyBase}/mcp/servers`);
  if (!serversResponse.ok) {
    throw new Error(`Failed to fetch servers: ${serversResponse.statusText}`);
  }

  const servers = await serversResponse.json();

  if (servers.length === 0) {
    console.log(JSON.stringify({
      summary: { totalServers: 0, successfulServers: 0, totalTools: 0 },
      servers: [],
      message: "No MCP servers configured"
    }, null, 2));
    Deno.exit(0);
  }

  const serversWithTools = [];

  for (const serverName of servers) {
    try {
      const toolsResponse = await fetch(
        `${proxyBase}/mcp/${encodeURIComponent(serverName)}/tools`
      );
      if (!toolsResponse.ok) {
        await toolsResponse.body?.cancel();
        serversWithTools.push({
          server: serverName,
          status: "error",
          error: `Failed to fetch tools: ${toolsResponse.statusText}`,
          toolCount: 0,
          tools: []
        });
        continue;
      }

      const toolsResult = await toolsResponse.json();
      const tools = toolsResult.tools || [];

      serversWithTools.push({
        server: serverName,
        status: "success",
        toolCount: tools.length,
        tools: tools.map((tool) => ({
          name: tool.name,
          description: tool.description,
          inputSchema: tool.inputSchema
        }))
      });
    } catch (error) {
      serversWithTools.push({
        server: serverName,
        status: "error",
        error: error.message,
        toolCount: 0,
        tools: []
      });
    }
  }

  const successfulServers = serversWithTools.filter((s) => s.status === "success").length;
  const totalTools = serversWithTools.reduce((sum, s) => sum + (s.toolCount || 0), 0);

  console.log(JSON.stringify({
    summary: {
      totalServers: servers.length,
      successfulServers: successfulServers,
      totalTools: totalTools
    },
    servers: serversWithTools
  }, null, 2));
} catch (error) {
  console.log(JSON.stringify({
    error: `Failed to fetch MCP server information: ${error.message}`,
    summary: { totalServers: 0, successfulServers: 0, totalTools: 0 },
    servers: []
  }, null, 2));
  Deno.exit(1);
}
"""


def proxy_base_url(host: str, port: int) -> str:
    """URL sandboxed code uses to reach the proxy. Wildcard binds map to loopback."""
    if host in _WILDCARD_HOSTS:
        host = "127.0.0.1"
    if ":" in host:
        host = f"[{host}]"
    return f"http://{host}:{port}"


def render_inventory_script(base_url: str) -> str:
    return _TEMPLATE.replace("__PROXY_BASE__", base_url)
