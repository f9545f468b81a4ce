from langgraph.graph import StateGraph, END
from app.agents.form_generator.state import GenerationState
from app.agents.form_generator.nodes.embed_prompt import embed_prompt_node
from app.agents.form_generator.nodes.retrieve_context import retrieve_context_node
from app.agents.form_generator.nodes.generate_schema import generate_schema_node
from app.agents.form_generator.nodes.parse_schema import parse_schema_node
from app.agents.form_generator.nodes.embed_summary import embed_summary_node
from app.agents.form_generator.nodes.persist_form import persist_form_node


STAGES = [
    ("embed_prompt", embed_prompt_node),
    ("retrieve_context", retrieve_context_node),
    ("generate_schema", generate_schema_node),
    ("parse_schema", parse_schema_node),
    ("embed_summary", embed_summary_node),
    ("persist_form", persist_form_node),
]


def route_after_stage(state: GenerationState) -> str:
    """Route based on whether the stage recorded an error"""
    if state.get("error"):
        return "failed"
    return "success"


def build_form_generator_graph():

    builder = StateGraph(GenerationState)

    for name, node in STAGES:
        builder.add_node(name, node)

    builder.set_entry_point(STAGES[0][0])

    # Every stage either advances or ends the run as failed.
    # retrieve_context never records an error of its own, only cancellation.
    for (name, _), (next_name, _) in zip(STAGES, STAGES[1:]):
        builder.add_conditional_edges(
            name,
            route_after_stage,
            {
                "success": next_name,
                "failed": END
            }
        )

    builder.add_edge(STAGES[-1][0], END)

    return builder.compile()


form_generator_graph = build_form_generator_graph()
