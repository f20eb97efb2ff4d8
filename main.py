#!/usr/bin/env python3
"""
FitPlanner terminal tool.
Generates a workout plan for an existing account and stores it.
"""

import argparse
import sys

from fitplanner.app_context import build_context
from fitplanner.config import configure_logging, load_config, load_environment
from fitplanner.errors import ConfigurationError, FitPlannerError, GenerationError
from fitplanner.models import EQUIPMENT_TIERS, FITNESS_LEVELS, TIME_OPTIONS, GeneratedPlan, GenerationPreferences
from fitplanner.plan_generator import PlanGenerator
from fitplanner.plan_parser import build_tracked_plan


def print_banner():
    """Print welcome banner."""
    banner = """
╔══════════════════════════════════════════════════════════════╗
║                                                              ║
║        FITPLANNER                                            ║
║        AI workout plans, powered by Claude                   ║
║                                                              ║
╚══════════════════════════════════════════════════════════════╝
    """
    print(banner)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Generate a workout plan for an existing user.")
    parser.add_argument("--email", required=True, help="Email of an account with a completed profile")
    parser.add_argument("--fitness-level", choices=sorted(FITNESS_LEVELS), default="beginner")
    parser.add_argument("--goals", default="")
    parser.add_argument("--time", type=int, choices=TIME_OPTIONS, default=45, dest="time_available")
    parser.add_argument("--equipment", choices=sorted(EQUIPMENT_TIERS), default="minimal")
    parser.add_argument("--extra-equipment", action="append", default=[], dest="custom_equipment")
    parser.add_argument("--track", metavar="NAME", help="Also add the plan to the tracker under NAME")
    parser.add_argument("--config", help="Path to config.yaml")
    return parser.parse_args(argv)


def main(argv=None):
    """Main application flow."""
    args = parse_args(argv)
    print_banner()

    load_environment()

    print("Loading configuration...")
    config = load_config(args.config)
    configure_logging(config)
    ctx = build_context(config)

    found = ctx.store.find_user_by_email(args.email.strip().lower())
    if found is None:
        print(f"\n❌ Error: no account found for {args.email}")
        sys.exit(1)
    user = found[0]

    profile = ctx.store.load_profile(user.id)
    if profile is None:
        print("\n❌ Error: this account has no profile yet. Complete onboarding in the web app first.")
        sys.exit(1)

    preferences = GenerationPreferences.from_dict({
        "fitness_level": args.fitness_level,
        "goals": args.goals,
        "time_available": args.time_available,
        "equipment": args.equipment,
        "custom_equipment": args.custom_equipment,
    })

    try:
        generator = PlanGenerator.from_config(config)
    except ConfigurationError as e:
        print(f"\n❌ Error: {e}")
        print("\nPlease:")
        print("1. Copy .env.example to .env")
        print("2. Add your Anthropic API key to .env")
        sys.exit(1)

    print("\n" + "=" * 60)
    print("GENERATING WORKOUT PLAN")
    print("=" * 60)

    def on_attempt(attempt, status):
        print(f"  status check {attempt}: {status.value}")

    try:
        plan_text = generator.generate(profile, preferences, on_attempt=on_attempt)
    except GenerationError as e:
        print(f"\n❌ {e}")
        sys.exit(1)

    generated = GeneratedPlan(plan=plan_text, preferences=preferences)
    generated.id = ctx.store.append_generated_plan(user.id, generated)
    print(f"\n✓ Plan saved (id {generated.id})")

    if args.track:
        tracked = build_tracked_plan(args.track, generated)
        if tracked.schedule:
            ctx.store.create_tracked_plan(user.id, tracked)
            print(f"✓ Added to tracker: {', '.join(tracked.schedule)}")
        else:
            print("⚠ No day-by-day schedule found in the plan; not added to the tracker.")

    print("\n" + "=" * 60)
    print("YOUR GENERATED WORKOUT PLAN")
    print("=" * 60)
    print("\n" + plan_text + "\n")
    print("Good luck with your training! 💪\n")


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\n\nExiting...")
        sys.exit(0)
    except FitPlannerError as e:
        print(f"\n❌ Error: {e}")
        sys.exit(1)
