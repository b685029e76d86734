"""Race officiating backend for ski mountaineering competitions."""
