"""Musical vocabulary shared by prompts and surfaces."""
